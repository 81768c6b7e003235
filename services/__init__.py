"""
services/ - Business Logic Layer
================================
Services validate input and orchestrate repository calls.
They raise the errors from utils.errors and know nothing about HTTP.
"""
