import logging

from flask import Flask, Response, jsonify, request

from reboot import config
from reboot.dashboard import SNAPSHOT_CACHE_KEY
from reboot.errors import StorageError, StorageUnavailable
from reboot.services import analytics
from reboot.services.agent import AgentConfig, DecisionAgent
from reboot.services.clock import now_ms
from reboot.services.export import build_export, dumps, export_filename
from reboot.services.store import LogStore

logger = logging.getLogger(__name__)


def create_app(store: LogStore, agent: DecisionAgent = None, lang: str = config.LANGUAGE) -> Flask:
    """Read-only JSON view over an initialized LogStore."""
    app = Flask(__name__)
    agent = agent or DecisionAgent(AgentConfig.from_env(), lang=lang)

    @app.errorhandler(StorageUnavailable)
    def storage_unavailable(exc):
        return jsonify({"status": "error", "message": str(exc)}), 503

    @app.errorhandler(StorageError)
    def storage_error(exc):
        logger.error("Storage error while serving %s: %s", request.path, exc)
        return jsonify({"status": "error", "message": str(exc)}), 500

    @app.route("/health")
    def health():
        """Liveness plus row count."""
        return jsonify({"status": "running", "logs": store.count()})

    @app.route("/api/logs")
    def logs():
        start = request.args.get("start", type=int)
        end = request.args.get("end", type=int)
        if start is not None or end is not None:
            entries = store.get_logs_by_date_range(start or 0, end if end is not None else now_ms())
        else:
            entries = store.get_all_logs()
        return jsonify([entry.to_dict() for entry in entries])

    @app.route("/api/summary")
    def summary():
        now = now_ms()
        entries = store.get_all_logs()
        return jsonify({
            "stats": analytics.calculate_stats(entries, now, store.tz),
            "insights": analytics.generate_insights(entries, now, store.tz, lang),
            "health": analytics.get_current_health(entries, now),
            "decision": agent.analyze_and_decide(entries, now).to_dict(),
        })

    @app.route("/api/snapshot")
    def snapshot():
        """What the bot last rendered, while it is younger than CACHE_MAX_AGE_SECONDS."""
        cached = store.get_cache(SNAPSHOT_CACHE_KEY, max_age_ms=config.CACHE_MAX_AGE_SECONDS * 1000)
        if cached is None:
            return jsonify({"status": "error", "message": "no recent snapshot"}), 404
        return jsonify(cached)

    @app.route("/api/export")
    def export():
        now = now_ms()
        document = build_export(store.get_all_logs(), now, store.tz)
        return Response(
            dumps(document),
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={export_filename(now, store.tz)}"},
        )

    return app


if __name__ == "__main__":
    from reboot.database import SessionLocal, engine

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log_store = LogStore(engine, SessionLocal)
    try:
        log_store.init()
    except StorageUnavailable as exc:
        logging.error("Storage unavailable: %s", exc)
        raise SystemExit(1)
    create_app(log_store).run(host="0.0.0.0", port=config.WEB_PORT, debug=False)
