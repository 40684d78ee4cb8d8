"""External data stores"""
