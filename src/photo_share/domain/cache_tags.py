"""Cache tag naming and the tag sets invalidated by each mutation.

Collection tags look like ``photos?authorId=<id>``; per-photo facets look like
``photos/<id>/<facet>``. Read paths register entries under the same helpers so
that both sides always agree on the strings.
"""

PHOTOS = "photos"

DETAIL = "detail"
COMMENTS = "comments"
LIKES = "likes"
LIKED = "liked"


def collection_tag(entity_kind: str, filter_key: str, filter_value: str) -> str:
    """Return the tag for a filtered collection."""
    return f"{entity_kind}?{filter_key}={filter_value}"


def facet_tag(entity_kind: str, entity_id: str, facet: str) -> str:
    """Return the tag for one facet of a single entity."""
    return f"{entity_kind}/{entity_id}/{facet}"


def photos_by_author_tag(author_id: str) -> str:
    return collection_tag(PHOTOS, "authorId", author_id)


def photo_detail_tag(photo_id: str) -> str:
    return facet_tag(PHOTOS, photo_id, DETAIL)


def photo_comments_tag(photo_id: str) -> str:
    return facet_tag(PHOTOS, photo_id, COMMENTS)


def photo_like_count_tag(photo_id: str) -> str:
    return facet_tag(PHOTOS, photo_id, LIKES)


def photo_liked_tag(photo_id: str, user_id: str) -> str:
    """Return the tag for one identity's like state of a photo."""
    return f"{facet_tag(PHOTOS, photo_id, LIKED)}?userId={user_id}"


def tags_for_create(author_id: str) -> frozenset[str]:
    """Tags invalidated when ``author_id`` posts a photo.

    Only the owner's listing changes membership in a cached entry; the
    unscoped listing is not served from a shared cache entry.
    """
    return frozenset({photos_by_author_tag(author_id)})


def tags_for_delete(photo_id: str, author_id: str) -> frozenset[str]:
    """Tags invalidated when a photo is deleted."""
    return frozenset(
        {
            photos_by_author_tag(author_id),
            photo_detail_tag(photo_id),
            photo_comments_tag(photo_id),
            photo_like_count_tag(photo_id),
        }
    )


def tags_for_like(photo_id: str, user_id: str) -> frozenset[str]:
    """Tags invalidated when ``user_id`` likes or unlikes a photo.

    Like state never changes listing membership, so listing tags stay valid.
    """
    return frozenset(
        {photo_liked_tag(photo_id, user_id), photo_like_count_tag(photo_id)}
    )
