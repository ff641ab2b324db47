"""
The Document base class, its chainable DocumentQuery and the shared MongoDB handle.
"""
