# src/context/__init__.py — v1
