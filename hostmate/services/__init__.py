"""Domain services used by the API routers and background jobs"""
