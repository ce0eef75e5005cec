"""Renovation planning API: AI chat, bills of materials and vendor product search."""
