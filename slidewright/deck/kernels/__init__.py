"""Deck kernels (auto-discovered by KernelRegistry)."""
