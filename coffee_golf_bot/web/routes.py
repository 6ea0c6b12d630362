"""
HTTP debug surface for the Coffee Golf bot.

A small aiohttp application served from the bot's own event loop. Each
handler is a thin wrapper over the store and leaderboard service, so the
same data the slash commands see can be inspected with curl.
"""

import json
import logging
import random
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from aiohttp import web

from coffee_golf_bot.config import Config
from coffee_golf_bot.constants import ScoringConstants
from coffee_golf_bot.data_models.scores import Attempt
from coffee_golf_bot.services.leaderboard import LeaderboardService
from coffee_golf_bot.services.score_store import ScoreStore
from coffee_golf_bot.utils.dates import format_date, local_now, parse_date, today_string
from coffee_golf_bot.utils.score_exceptions import AttemptLimitError, ScoreBotException
from coffee_golf_bot.utils.scoring import ScoringMode

logger = logging.getLogger(__name__)

STORE_KEY = web.AppKey('score_store', ScoreStore)
LEADERBOARD_KEY = web.AppKey('leaderboard_service', LeaderboardService)
DAILY_CAP_KEY = web.AppKey('daily_cap', int)

DEFAULT_TEST_ROUTE = '🟦🟨🟩'


def _error(status: int, message: str) -> web.Response:
    return web.json_response({'error': message}, status=status)


def _bad_request(message: str) -> web.HTTPBadRequest:
    return web.HTTPBadRequest(text=json.dumps({'error': message}), content_type='application/json')


@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except AttemptLimitError as e:
        return _error(409, e.user_message)
    except ScoreBotException as e:
        return _error(400, e.user_message)
    except Exception as e:
        logger.error(f"Unhandled error serving {request.method} {request.path}: {e}", exc_info=True)
        return _error(500, 'Internal server error')


def _query_days(request: web.Request) -> Optional[int]:
    raw = request.query.get('days')
    if raw is None or raw == '':
        return None
    try:
        return int(raw)
    except ValueError:
        raise _bad_request(f"days must be an integer, got '{raw}'")


def _query_date(request: web.Request) -> str:
    raw = request.query.get('date') or today_string()
    try:
        return format_date(parse_date(raw))
    except ValueError:
        raise _bad_request(f"date must be YYYY-MM-DD, got '{raw}'")


async def health(request: web.Request) -> web.Response:
    return web.json_response({'status': 'ok', 'today': today_string()})


async def leaderboard(request: web.Request) -> web.Response:
    service = request.app[LEADERBOARD_KEY]
    report = await service.build_board(
        scope=request.query.get('scope', 'today'),
        days=_query_days(request),
        mode_option=request.query.get('mode') or request.query.get('scoring'),
    )
    return web.json_response(report.to_dict())


async def debug_data(request: web.Request) -> web.Response:
    document = await request.app[STORE_KEY].load()
    return web.json_response(document.to_dict())


async def debug_scores_for_date(request: web.Request) -> web.Response:
    date = _query_date(request)
    mode = ScoringMode.from_option(request.query.get('scoring'))
    entries = await request.app[LEADERBOARD_KEY].daily_leaderboard(date, mode)
    return web.json_response({
        'date': date,
        'scoringType': mode.value,
        'scores': [
            {
                'rank': entry.rank,
                'rankLabel': entry.rank_label,
                'playerId': entry.player_id,
                'playerName': entry.player_name,
                'strokes': entry.strokes,
                'attempt': entry.attempt_index,
                'route': entry.route,
            }
            for entry in entries
        ],
        'count': len(entries),
    })


async def debug_dates(request: web.Request) -> web.Response:
    now = local_now()
    return web.json_response({
        'currentUTCDate': datetime.now(timezone.utc).isoformat(),
        'timezone': Config.TIMEZONE,
        'yesterday': format_date((now - timedelta(days=1)).date()),
        'today': format_date(now.date()),
        'tomorrow': format_date((now + timedelta(days=1)).date()),
    })


def _attempt_from_body(body: dict) -> Attempt:
    try:
        strokes = int(body.get('strokes', random.randint(5, 14)))
        timestamp = int(body.get('timestamp', time.time() * 1000))
    except (TypeError, ValueError):
        raise _bad_request('strokes and timestamp must be integers')
    if not ScoringConstants.MIN_STROKES <= strokes <= ScoringConstants.MAX_STROKES:
        raise _bad_request(f"strokes must be between {ScoringConstants.MIN_STROKES} and {ScoringConstants.MAX_STROKES}")

    raw_date = body.get('date') or today_string()
    try:
        date = format_date(parse_date(str(raw_date)))
    except ValueError:
        raise _bad_request(f"date must be YYYY-MM-DD, got '{raw_date}'")

    return Attempt(
        player_id=str(body.get('playerId', 'test-user')),
        player_name=str(body.get('playerName', 'Test User')),
        date=date,
        strokes=strokes,
        message_id=str(body.get('messageId') or f"test-{uuid.uuid4().hex}"),
        timestamp=timestamp,
        route=body.get('route', DEFAULT_TEST_ROUTE) or None,
    )


async def debug_add_score(request: web.Request) -> web.Response:
    if request.can_read_body:
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return _error(400, 'Request body must be JSON')
        if not isinstance(body, dict):
            return _error(400, 'Request body must be a JSON object')
    else:
        body = {}

    attempt = _attempt_from_body(body)
    result = await request.app[STORE_KEY].record_attempt(attempt, daily_cap=request.app[DAILY_CAP_KEY])
    return web.json_response({
        'score': attempt.to_dict(),
        'result': {
            'isFirst': result.is_first_of_day,
            'attemptNumber': result.attempt_index,
        },
    })


def create_app(store: ScoreStore, leaderboard_service: LeaderboardService, daily_cap: Optional[int] = None) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[STORE_KEY] = store
    app[LEADERBOARD_KEY] = leaderboard_service
    app[DAILY_CAP_KEY] = daily_cap if daily_cap is not None else Config.MAX_DAILY_ATTEMPTS

    app.router.add_get('/health', health)
    app.router.add_get('/leaderboard', leaderboard)
    app.router.add_get('/test/data', debug_data)
    app.router.add_get('/test/scores/date', debug_scores_for_date)
    app.router.add_get('/test/dates', debug_dates)
    app.router.add_post('/test/score', debug_add_score)
    return app


async def start_http_server(app: web.Application, host: str, port: int) -> web.AppRunner:
    """Serve ``app`` on the running event loop. Returns the runner for cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"HTTP debug server listening on {host}:{port}")
    return runner


async def stop_http_server(runner: Optional[web.AppRunner]):
    if runner is not None:
        await runner.cleanup()
        logger.info("HTTP debug server stopped")
