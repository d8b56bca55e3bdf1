"""
Customer service for the Customer Access layer.
"""
