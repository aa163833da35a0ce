"""
Bulk import of scraped restaurant records into places.
"""
