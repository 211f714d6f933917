"""Core utilities: configuration, logging and errors"""
