# src/resource/__init__.py — v1
