"""
LLM PR Reviewer Server

Flask server that runs a review pass on request.
"""

import asyncio
import copy
import json
import logging
from typing import Callable, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS
from pydantic import ValidationError

from . import __version__
from .config import AppConfig
from .exceptions import ConfigError, TransportError
from .models.review import ReviewRequestModel
from .pipeline import ReviewPipeline


logger = logging.getLogger(__name__)

PipelineFactory = Callable[[AppConfig], ReviewPipeline]


def build_request_config(base: AppConfig, review_request: ReviewRequestModel) -> AppConfig:
    """Overlay a review request onto the server's base configuration."""
    config = copy.deepcopy(base)

    owner, _, repo = review_request.repository.partition('/')
    config.github.owner = owner
    config.github.repo = repo
    config.github.pr_number = review_request.pr_number
    if review_request.github_token:
        config.github.token = review_request.github_token

    # 요청에 명시된 옵션만 덮어씀
    for name, value in review_request.options.model_dump(exclude_none=True).items():
        setattr(config.review, name, value)

    config.validate()
    return config


def create_app(
    base_config: Optional[AppConfig] = None,
    pipeline_factory: PipelineFactory = ReviewPipeline.from_config,
) -> Flask:
    """
    Create the Flask application.

    Args:
        base_config: Configuration the per-request values are layered on
        pipeline_factory: Builds a pipeline from the per-request configuration

    Returns:
        Flask app
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend

    base = base_config or AppConfig.from_env()

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'llm-pr-reviewer',
            'version': __version__
        })

    @app.route('/api/v1/reviews/generate', methods=['POST'])
    def generate_review():
        """Run one review pass for a pull request."""
        try:
            review_request = ReviewRequestModel.model_validate(request.get_json(silent=True) or {})
            config = build_request_config(base, review_request)
        except ValidationError as e:
            return jsonify({'error': json.loads(e.json(include_url=False)), 'status': 'failed'}), 400
        except ConfigError as e:
            return jsonify({'error': str(e), 'status': 'failed'}), 400

        try:
            result = asyncio.run(pipeline_factory(config).run())
        except TransportError as e:
            logger.error(f"Review failed for {review_request.repository}#{review_request.pr_number}: {e}")
            return jsonify({'error': str(e), 'status': 'failed'}), 502

        return jsonify({
            'status': 'completed',
            'repository': result.repository,
            'pr_number': result.pr_number,
            'total_comments': len(result.comments),
            'files_with_comments': result.files_with_comments,
            'processing_time': result.processing_time
        })

    return app
