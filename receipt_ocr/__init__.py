"""Receipt OCR line-item extraction.

Turns photographed receipts into ordered (name, price) line items by
normalizing the image, running Tesseract OCR, and classifying each
text line with locale-aware price parsing.
"""
