"""Core settings, database, logging, security and exceptions"""
