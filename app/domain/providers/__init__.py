"""Providers domain - public provider directory and provider self-service"""
