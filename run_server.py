#!/usr/bin/env python3
"""
LLM PR Reviewer Server

Runs the Flask server that reviews pull requests on request.
"""

import os

from llm_pr_reviewer.config import AppConfig, setup_logging
from llm_pr_reviewer.server import create_app


config = AppConfig.from_env()
setup_logging(config.logging)
app = create_app(config)

if __name__ == '__main__':
    port = int(os.getenv('PORT', '8000'))

    print("🚀 Starting LLM PR Reviewer Server...")
    print(f"📍 Server will be available at: http://localhost:{port}")
    print("📋 API Documentation:")
    print("   - Health Check: GET /api/v1/health")
    print("   - Generate Review: POST /api/v1/reviews/generate")

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug
    )
