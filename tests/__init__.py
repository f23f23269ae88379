"""Tests for the neatest package.

TEST INTEGRITY: a failing test is a question about the fixture formats, not
an obstacle. Do not skip, loosen or delete a test without agreeing on the
expected behaviour first.
"""
