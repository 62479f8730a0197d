# Standard Library Imports
import os
import time
import logging

# Third-Party Imports
from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

# Local Module Imports
from json_responses import (
    ResponseDispatcher,
    StatusRegistry,
    get_dispatcher,
    setup_logging
)


# Load environment variables from .env file
load_dotenv()

# Initialize Flask application
app = Flask(__name__)
CORS(app)  # Enable Cross-Origin Resource Sharing (CORS) for handling requests from different origins

# Store application start time for uptime tracking
app.start_time = time.time()

# Configure logging
setup_logging(app)

# Get logger for this module
logger = logging.getLogger(__name__)

# Status profiles are fixed before the app starts serving requests
dispatcher = ResponseDispatcher(
    registry=StatusRegistry(),
    logger=logging.getLogger("json_responses.access")
)
dispatcher.init_app(app)


@app.route("/")
def home():
    """
    Handles the root endpoint ("/") of the service.

    Returns:
        Response (JSON): A JSON response describing the service.
    """
    return get_dispatcher().respond(
        200,
        message="JSON response service is running",
        data={
            "name": "json-responses",
            "version": "1.0.0",
            "status": "running",
        }
    )


@app.route("/health")
def health_check():
    """
    Health check endpoint to verify the API is running.

    It can be used by monitoring systems to check if the API is operational.

    Returns:
        Response (JSON): A JSON response with the API status.
    """
    return get_dispatcher().respond(
        200,
        message="API is operational",
        data={
            "status": "ok",
            "uptime": time.time() - app.start_time,
        }
    )


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8080))
    logger.info(f"Server starting on :{port}")
    # Use threaded=True for better performance with multiple requests
    app.run(host="0.0.0.0", port=port, threaded=True)
