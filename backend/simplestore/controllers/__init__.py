# Controllers package initialization
# Each module defines the Flask blueprint(s) for one API resource.
