"""Backend of the family tree application.

Google sign in, stateless session tokens, and storage of family trees.
"""
