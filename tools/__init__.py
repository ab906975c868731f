"""
Client-side state: debounced resource loaders, delayed tasks and the tab workspace.
"""
