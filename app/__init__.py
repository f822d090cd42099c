"""
SaaS Starter - authentication and an example tasks feature
"""
