"""Global variable catalog.

This app owns the list of variables chart formulas may reference
(`VariableDefinition`), the process-wide catalog cache built from it, and the
endpoint that serves the catalog to the formula editor.
"""
