"""
Notification subsystem.

Components:
- models.py: channel / request / event types
- scheduler.py: pure rules turning a task into trigger requests
- service.py: hands requests to a platform, logs platform events
- platform.py: in-process platform holding pending triggers
- delivery.py: polling loop that presents due triggers
"""
