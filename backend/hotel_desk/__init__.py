"""Hotel Desk - 酒店前台管理后端"""
__version__ = "1.0.0"
