# HTTP module
