from portfolio_intel.schemas import tripadvisor as ta
from portfolio_intel.schemas.records import (
    PhotoImages,
    ReviewUser,
    Subrating,
    TripAdvisorPhoto,
    TripAdvisorRecord,
    TripAdvisorReview,
)


def parse_float(value) -> float | None:
    """Parse a numeric API value; anything unparseable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:  # NaN
        return None
    return result


def parse_int(value) -> int | None:
    number = parse_float(value)
    if number is None or number in (float("inf"), float("-inf")):
        return None
    return int(number)


def _nested(data: dict | None, *keys: str) -> str | None:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data if isinstance(data, str) else None


def map_review(review: ta.TripAdvisorReview) -> TripAdvisorReview:
    return TripAdvisorReview(
        id=review.id,
        title=review.title,
        text=review.text,
        rating=review.rating,
        publishedDate=review.published_date,
        helpfulVotes=review.helpful_votes,
        tripType=review.trip_type,
        travelDate=review.travel_date,
        user=ReviewUser(
            username=_nested(review.user, "username"),
            avatar=_nested(review.user, "avatar", "thumbnail", "url"),
            userLocation=_nested(review.user, "user_location", "name"),
        ),
        url=review.url,
    )


def map_photo(photo: ta.TripAdvisorPhoto) -> TripAdvisorPhoto:
    images = photo.images or {}
    return TripAdvisorPhoto(
        id=photo.id,
        caption=photo.caption,
        publishedDate=photo.published_date,
        source=_nested(photo.source, "name") or "unknown",
        user=_nested(photo.user, "username"),
        images=PhotoImages(**{
            size: _nested(images.get(size), "url")
            for size in ("thumbnail", "small", "medium", "large", "original")
        }),
    )


def map_subratings(subratings: dict[str, dict] | None) -> dict[str, Subrating]:
    return {
        key: Subrating(name=value.get("localized_name"), value=parse_float(value.get("value")))
        for key, value in (subratings or {}).items()
        if isinstance(value, dict)
    }


def map_tripadvisor_record(
    property_id: int,
    fetched_at: str,
    location: ta.TripAdvisorLocation,
    reviews: list[ta.TripAdvisorReview],
    photos: list[ta.TripAdvisorPhoto],
) -> TripAdvisorRecord:
    """Normalize TripAdvisor details, reviews and photos into one record."""
    ranking = location.ranking_data or {}
    return TripAdvisorRecord(
        propertyId=property_id,
        fetchedAt=fetched_at,
        locationId=location.location_id or None,
        locationIdStr=str(location.location_id) if location.location_id else None,
        tripadvisorUrl=location.web_url,
        name=location.name,
        address=_nested(location.address_obj, "address_string"),
        rating=parse_float(location.rating) or None,
        numReviews=parse_int(location.num_reviews),
        rankingString=ranking.get("ranking_string"),
        rankingCategory=ranking.get("ranking_category"),
        priceLevel=location.price_level,
        priceRange=location.price,
        numRooms=parse_int(location.num_rooms) or None,
        subratings=map_subratings(location.subratings),
        awardedBadges=[
            a["display_name"] for a in location.awards or [] if a.get("display_name")
        ],
        reviews=[map_review(r) for r in reviews],
        photos=[map_photo(p) for p in photos],
    )


def map_tripadvisor_summary(location: ta.TripAdvisorLocation) -> dict:
    """Compact TripAdvisor view cached alongside a saved hotel."""
    ranking = location.ranking_data or {}
    summary = {
        "locationId": location.location_id or None,
        "name": location.name,
        "tripadvisorUrl": location.web_url,
        "rating": parse_float(location.rating) or None,
        "numReviews": parse_int(location.num_reviews),
        "rankingString": ranking.get("ranking_string"),
        "priceLevel": location.price_level,
        "numRooms": parse_int(location.num_rooms) or None,
    }
    return {k: v for k, v in summary.items() if v is not None}
