def test_public_imports() -> None:
    # A lightweight contract test: keep the most common imports stable.
    import epradpy

    assert hasattr(epradpy, "__version__")

    from epradpy import (  # noqa: F401
        EPRad,
        EventGrid,
        EventSampler,
        RadiativeCrossSection,
        form_factors,
        sigma_born,
    )
