"""
Public endpoints - no authentication required

GET /api/v1/public/usage?key=xxx&period=today
GET /api/v1/public/usage?key=xxx&start_date=2024-01-01&end_date=2024-01-31
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Query

from app.core.errors import AppError, BadRequestError
from app.core.response import success, error_from
from app.models.common import ErrorResponse
from app.models.usage import PublicUsageEnvelope, PublicUsageStatsResponse
from app.services.api_key_service import get_by_key
from app.services.usage_service import get_detailed_stats_by_api_key
from app.utils.timezone import (
    now_in_user_location,
    start_of_day_in_user_location,
    parse_date_in_user_location,
    end_of_day,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PERIOD = "today"


def months_before(now: datetime, months: int) -> datetime:
    """
    Same day and wall-clock time, `months` calendar months earlier
    
    A day past the end of the target month rolls forward into the next one,
    so Mar 31 minus one month is Mar 2 in a leap year.
    """
    first_of_month = now.replace(day=1) - relativedelta(months=months)
    return first_of_month + timedelta(days=now.day - 1)


def resolve_time_range(now: datetime, tz_name: Optional[str], period: Optional[str],
                       start_date: Optional[str], end_date: Optional[str]) -> Tuple[datetime, datetime]:
    """
    Work out the (start, end) window for a usage query
    
    A custom range needs both dates; otherwise the period decides and an
    unrecognized period behaves like 'today'.
    
    Raises:
        BadRequestError: a custom date is not YYYY-MM-DD
    """
    if start_date and end_date:
        try:
            start_time = parse_date_in_user_location(start_date, tz_name)
        except ValueError:
            raise BadRequestError("Invalid start_date format, use YYYY-MM-DD")
        try:
            end_time = parse_date_in_user_location(end_date, tz_name)
        except ValueError:
            raise BadRequestError("Invalid end_date format, use YYYY-MM-DD")
        return start_time, end_of_day(end_time)
    
    period = period if period is not None else DEFAULT_PERIOD
    if period == "week":
        start_time = now - timedelta(days=7)
    elif period == "month":
        start_time = months_before(now, 1)
    else:
        start_time = start_of_day_in_user_location(now, tz_name)
    return start_time, now


@router.get(
    "/usage",
    response_model=PublicUsageEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)  # Full path: /api/v1/public/usage
async def public_usage(
    key: Optional[str] = Query(None, description="API key to report on"),
    timezone: Optional[str] = Query(None, description="IANA timezone, e.g. Asia/Shanghai"),
    period: Optional[str] = Query(None, description="today, week or month"),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, needs end_date"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, needs start_date"),
):
    """
    Usage statistics for an API key
    Access: public
    """
    if not key:
        raise BadRequestError("API key is required")
    
    try:
        api_key = get_by_key(key)
    except AppError:
        raise
    except Exception as e:
        return error_from(e)
    
    if not api_key.is_active():
        raise BadRequestError("API key is not active")
    
    now = now_in_user_location(timezone)
    start_time, end_time = resolve_time_range(now, timezone, period, start_date, end_date)
    
    try:
        stats = get_detailed_stats_by_api_key(api_key.id, start_time, end_time)
    except AppError:
        raise
    except Exception as e:
        return error_from(e)
    
    return success(PublicUsageStatsResponse.from_stats(stats))
