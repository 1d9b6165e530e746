"""
image_retrieval — Content-based image retrieval engine.

Extracts colour, texture and composite feature vectors from images and
ranks a corpus of stored vectors against a target by an exact linear
scan under each descriptor's paired metric.

Modules:
    histograms     Centre patch, chromaticity and RGB histograms
    texture        Sobel gradients, GLCM, Laws' and Gabor filter banks
    composite      Colour+texture and weighted custom descriptors
    scoring        SSD, intersection, split intersection, cosine metrics
    ranking        Top-N ranking with stable tie-break
    descriptors    Descriptor tag -> extractor + metric registry
    config         RetrievalConfig parameters
    errors         Error taxonomy
    preprocessing  Image validation and region helpers
    feature_store  CSV persistence of (identifier, vector) rows
    index_builder  Directory -> feature file extraction
    engine         SearchEngine over a stored feature file
    cli            Command-line entry point
"""

__version__ = "1.0.0"
