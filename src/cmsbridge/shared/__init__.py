"""Helpers shared by the site and deploy layers."""
