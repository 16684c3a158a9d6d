"""
Vercel serverless function entry point for Flask app
"""
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sanskrit_service import app

# The 'app' variable must be the Flask application
