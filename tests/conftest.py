import pytest

from roofroute.data.zip_centroids import clear_zip_centroid_cache


@pytest.fixture(autouse=True)
def clear_centroid_cache():
    clear_zip_centroid_cache()
    yield
    clear_zip_centroid_cache()
