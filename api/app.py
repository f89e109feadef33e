import logging
import os
import sys

from flask import Flask, jsonify, request

# Ensure project root is in path for imports
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from voice_core import ConfigManager, InvalidAudioError, ScoringEngine, read_audio_mono
from voice_core.asr import TranscriptionClient
from voice_core.config import rebalance_weights, source_from_env

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Largest accepted upload (bytes)
MAX_UPLOAD_BYTES = 25 * 1024 * 1024


def build_engine():
    """Engine wired from the environment (VOICE_CONFIG_URL, VOICE_TRANSCRIBE_URL)."""
    return ScoringEngine(ConfigManager(source_from_env()), TranscriptionClient())


def create_app(engine=None):
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_BYTES
    app.config['SCORING_ENGINE'] = engine or build_engine()

    def get_engine():
        return app.config['SCORING_ENGINE']

    # ========================================================================
    # ROUTES - HEALTH
    # ========================================================================
    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    # ========================================================================
    # ROUTES - ANALYSIS
    # ========================================================================
    @app.route('/api/analyze', methods=['POST'])
    def analyze():
        """Score an uploaded recording (multipart field ``audio``)."""
        if 'audio' not in request.files:
            return jsonify({"error": "No audio file"}), 400

        file = request.files['audio']
        audio_bytes = file.read()
        content_type = request.form.get('mimeType') or file.mimetype or 'audio/wav'

        try:
            buffer = read_audio_mono(audio_bytes)
            result = get_engine().analyze(buffer, audio=audio_bytes, content_type=content_type)
        except InvalidAudioError as e:
            return jsonify({"error": str(e)}), 400

        logger.info(
            f"Scored {buffer.duration:.2f}s take: overall={result.overall_score} "
            f"method={result.speech_rate.method}"
        )
        return jsonify(result.to_dict())

    @app.route('/api/analyze/samples', methods=['POST'])
    def analyze_samples():
        """Score samples decoded by the client: ``{"samples": [...], "sampleRate": 16000}``."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'samples' not in data or 'sampleRate' not in data:
            return jsonify({"error": "samples and sampleRate are required"}), 400

        try:
            result = get_engine().analyze(data['samples'], data['sampleRate'])
        except InvalidAudioError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(result.to_dict())

    # ========================================================================
    # ROUTES - CONFIGURATION
    # ========================================================================
    @app.route('/api/config', methods=['GET'])
    def scoring_config():
        """Active metric definitions in the external row format."""
        config = get_engine().config_manager.get_config_fresh()
        return jsonify({"metrics": config.to_rows(), "totalWeight": config.total_weight})

    @app.route('/api/config/rebalanced', methods=['GET'])
    def rebalanced_config():
        """Preview of the active definitions with weights scaled to total 100."""
        config = rebalance_weights(get_engine().config_manager.get_config_fresh())
        return jsonify({"metrics": config.to_rows(), "totalWeight": config.total_weight})

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
