"""pupstitch: amigurumi dog pattern compiler and page layout engine."""
