from collections.abc import Callable

from portfolio_intel.schemas.google_places import (
    PlaceCandidate,
    PlaceDetails,
    PlacePhoto,
    PlaceReview,
)
from portfolio_intel.schemas.records import GooglePhoto, GoogleRecord, GoogleReview

MAX_REVIEWS = 5
MAX_PHOTOS = 60


def map_review(review: PlaceReview) -> GoogleReview:
    return GoogleReview(
        author=review.author_name,
        rating=review.rating,
        text=review.text,
        time=review.time,
        timeDescription=review.relative_time_description,
        profilePhoto=review.profile_photo_url,
        googleMapsUrl=review.author_url,
    )


def map_photo(photo: PlacePhoto, photo_url: Callable[[str], str]) -> GooglePhoto:
    return GooglePhoto(
        url=photo_url(photo.photo_reference),
        width=photo.width,
        height=photo.height,
        attributions=photo.html_attributions,
    )


def map_google_record(
    property_id: int,
    fetched_at: str,
    candidate: PlaceCandidate,
    details: PlaceDetails,
    photo_url: Callable[[str], str],
    max_photos: int = MAX_PHOTOS,
) -> GoogleRecord:
    """Normalize a search candidate plus its details into one record.

    Details win over the search candidate; the candidate fills gaps.
    """
    return GoogleRecord(
        propertyId=property_id,
        fetchedAt=fetched_at,
        placeId=candidate.place_id,
        googleMapsUrl=details.url,
        website=details.website,
        phone=details.formatted_phone_number,
        rating=details.rating or candidate.rating,
        totalRatings=details.user_ratings_total or candidate.user_ratings_total,
        address=candidate.formatted_address or details.formatted_address,
        priceLevel=details.price_level,
        rawName=details.name,
        reviews=[map_review(r) for r in details.reviews[:MAX_REVIEWS]],
        photos=[map_photo(p, photo_url) for p in details.photos[:max_photos]],
    )
