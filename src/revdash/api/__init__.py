"""HTTP/WebSocket read-model API for the dashboard"""
