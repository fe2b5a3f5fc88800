"""Core configuration, database and security helpers"""
