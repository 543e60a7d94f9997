"""Filesystem services shared by repository backends."""
