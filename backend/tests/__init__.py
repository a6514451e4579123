"""Test suite for the watermark upload backend."""
