"""Clients and payload builders for the Page4U backend"""
