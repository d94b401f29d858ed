"""Application services layer (events, state, auth, background sync).

Services coordinate domain rules and infrastructure clients. They should avoid
UI concerns; renderers subscribe to events and read state instead.
"""
