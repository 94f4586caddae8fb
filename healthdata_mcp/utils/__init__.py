# healthdata_mcp/utils/__init__.py
