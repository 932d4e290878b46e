"""Cipta Mandiri Perkasa: marketing site, admin console and visitor analytics."""
