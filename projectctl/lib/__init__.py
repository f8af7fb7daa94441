"""Shared helpers: errors, paths, digests, rendering, CLI context"""
