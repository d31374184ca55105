#!/usr/bin/env python3
"""
Icon Resizer API Server
Upload one PNG or SVG and get back transparent square icons (64/32/16 by default).
"""

import logging
import base64
from typing import Dict, Any

import config

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.utils import secure_filename

from models.encoded_image import EncodedImage
from models.pipeline_result import PipelineResult
from models.errors import UnsupportedFormatError, DecodeError, EncodeError
from pipeline.icon_resizer import IconResizer, FailurePolicy, normalize_sizes
from services.decoding_service import DecodingService
from services.image_service import ImageService

logger = logging.getLogger(__name__)

image_service = ImageService()


def to_data_url(encoded: EncodedImage) -> str:
    """Encode PNG bytes as a data URL for JSON responses."""
    base64_string = base64.b64encode(encoded.data).decode('utf-8')
    return f"data:{encoded.mime_type};base64,{base64_string}"


def result_to_json(result: PipelineResult) -> Dict[str, Any]:
    return {
        'success': result.ok,
        'sizes': result.sizes,
        'images': [
            {
                'size': size,
                'filename': encoded.filename,
                'data_url': to_data_url(encoded),
            }
            for size, encoded in result.images.items()
        ],
        'preview': {
            'width': result.preview.width,
            'height': result.preview.height,
            'data_url': to_data_url(result.preview),
        },
        'failures': {str(size): str(err) for size, err in result.failures.items()},
    }


def create_app(sizes=None, failure_policy=None, max_target_size=None) -> Flask:
    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend communication

    app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    app.config['MAX_TARGET_SIZE'] = max_target_size or config.MAX_TARGET_SIZE
    app.config['TARGET_SIZES'] = normalize_sizes(sizes or config.TARGET_SIZES,
                                                  max_size=app.config['MAX_TARGET_SIZE'])
    app.config['FAILURE_POLICY'] = failure_policy or FailurePolicy.from_name(config.FAILURE_POLICY)

    @app.route('/api/resize', methods=['POST'])
    def resize():
        """Resize an uploaded PNG/SVG into every configured square size."""
        if 'image' not in request.files:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'success': False, 'message': 'No file selected'}), 400

        filename = secure_filename(file.filename)
        mime_type = file.mimetype
        if not mime_type or mime_type == 'application/octet-stream':
            mime_type = image_service.guess_mime_type(filename)

        try:
            sizes = app.config['TARGET_SIZES']
            if request.form.get('sizes'):
                sizes = normalize_sizes(config.parse_sizes(request.form['sizes']),
                                        max_size=app.config['MAX_TARGET_SIZE'])
        except ValueError as e:
            return jsonify({'success': False, 'message': str(e)}), 400

        try:
            # Type check happens before the upload stream is read.
            DecodingService.ensure_supported(mime_type)
            source = image_service.create_source(file.read(), mime_type)

            logger.info(f"Resizing upload {filename} ({mime_type}) to {list(sizes)}")
            resizer = IconResizer(sizes, failure_policy=app.config['FAILURE_POLICY'])
            result = resizer.run(source)
        except UnsupportedFormatError as e:
            logger.info(f"Rejected upload {filename}: {e}")
            return jsonify({'success': False, 'error': 'unsupported_format',
                            'message': 'Please upload a PNG or SVG file.'}), 415
        except DecodeError as e:
            logger.error(f"Decode error for {filename}: {e}")
            return jsonify({'success': False, 'error': 'decode_error', 'message': str(e)}), 422
        except EncodeError as e:
            logger.error(f"Encode error for {filename}: {e}")
            return jsonify({'success': False, 'error': 'encode_error', 'message': str(e)}), 500

        if not result.images:
            # Every size failed under the isolate policy
            return jsonify(result_to_json(result)), 500
        return jsonify(result_to_json(result))

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Icon Resizer API is running',
            'sizes': list(app.config['TARGET_SIZES']),
            'failure_policy': app.config['FAILURE_POLICY'].value,
        })

    @app.errorhandler(413)
    def too_large(e):
        """Handle file too large error."""
        return jsonify({'success': False,
                        'error': f'File too large. Maximum size is {config.MAX_UPLOAD_SIZE_MB}MB.'}), 413

    @app.errorhandler(500)
    def internal_error(e):
        """Handle internal server error."""
        logger.error(f"Internal server error: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    # --- Centralized Logging Configuration ---
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)

    app = create_app()
    print("🚀 Starting Icon Resizer API Server...")
    print(f"📐 Target sizes: {list(app.config['TARGET_SIZES'])}")
    print(f"🔧 Max upload size: {config.MAX_UPLOAD_SIZE_MB}MB")
    print(f"🧯 Failure policy: {app.config['FAILURE_POLICY'].value}")
    print("🌐 CORS enabled for frontend communication")
    print("="*60)

    app.run(host=config.API_HOST, port=config.API_PORT, debug=False, threaded=True)
