"""Components shared by the bounded contexts and the infrastructure layer.

Only the observation context bound to every probe lives here.
"""
