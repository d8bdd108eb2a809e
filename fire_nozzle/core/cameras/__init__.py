"""Thermal frame sources"""
