"""
Readers for the formats on either side of an export.

    • joplin_raw      Joplin RAW export directories (the input side)
    • exported_note   Markdown notes written by an export (the output side)
"""
