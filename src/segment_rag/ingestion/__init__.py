"""
Ingestion — chunking, LLM segmentation, id allocation, embedding, and upload.

Turns one long document into points stored in a vector collection::

    chunk → segment → allocate ids → embed → upload
"""
