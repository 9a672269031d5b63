import argparse
import logging
from sys import exit

from flask import Flask, jsonify, request
from waitress import serve

from config_loader import DEFAULT_CONFIG, configure_logging, load_config, select_run_config
from extraction_processing import extract_and_concatenate
from summarize import Summarizer
from warc_errors import NoFileProvided


def get_uploaded_file():
    """
    :return: the single file sent in the "file" form field
    :raises NoFileProvided: if there is no such file, or more than one
    """
    files = request.files.getlist("file")
    if len(files) != 1:
        raise NoFileProvided()
    return files[0]


def create_app(summarizer):
    """
    :param summarizer: the process-wide Summarizer, reused by every request
    """
    app = Flask(__name__)
    app.extensions["summarizer"] = summarizer

    @app.route("/api/processing", methods=["POST"])
    def processing():
        """
        Extract the uploaded archive and summarize what was found.
        """
        try:
            upload = get_uploaded_file()
        except NoFileProvided as e:
            logging.warning(f"Rejected upload: {e}")
            return jsonify({"error": str(e)}), 400

        try:
            logging.info(f"Processing upload: {upload.filename}")
            content = extract_and_concatenate(upload.stream)
            result = app.extensions["summarizer"].summarize(content)
        except Exception as e:
            logging.exception(f"Error processing {upload.filename}")
            return jsonify({"error": str(e)}), 500

        return jsonify({"result": result}), 200

    return app


def main():
    parser = argparse.ArgumentParser(description="Serve the web archive summarizer")
    parser.add_argument('--config', default=str(DEFAULT_CONFIG), type=str)
    parser.add_argument(
        "--run_mode",
        choices=["dev", "prod"],
        default="dev",
        help="Specify the run mode: 'dev' or 'prod'"
    )
    parser.add_argument('--hostname', default=None, type=str)
    parser.add_argument('--port', default=None, type=int)
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    try:
        config = select_run_config(load_config(args.config), args.run_mode, args.config)
    except (OSError, KeyError) as e:
        print(f"Cannot load configuration: {e}")
        exit(1)

    configure_logging(config['log_dir'], "serve_warcbuddy.log", args.debug)

    host_name = args.hostname or config['hostname']
    server_port = args.port or config['port']

    app = create_app(Summarizer.from_config(config))

    logging.info(f"Starting warcbuddy server process at {host_name}:{server_port}")
    serve(app, host=host_name, port=server_port)


if __name__ == "__main__":
    main()
