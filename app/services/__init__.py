"""
Services package - lifecycle, bulk operations, cleanup, uploads and ratings
"""
