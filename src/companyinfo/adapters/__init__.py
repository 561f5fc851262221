"""Adapters: everything that touches the network or the markup.

Each module implements one of the contracts in `companyinfo.core.interfaces`.
"""
