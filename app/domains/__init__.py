# app/domains/__init__.py

"""
Business domains: 'usr' (accounts), 'inv' (containers and products) and
'shared' (signed image uploads).
"""
