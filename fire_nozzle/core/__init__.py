"""Core pipeline components"""
