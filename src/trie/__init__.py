"""Byte-keyed trie engine.

This package holds the node arena and the trie built on top of it.
It exposes both the raising method API and the tagged-outcome API.
"""
