"""
Travel Crew Backend — Services Layer
======================================

Service Inventory:
    - AssetStore (abstract): upload / destroy / health_check for images
    - CloudinaryAssetStore:  signed Cloudinary REST client (production)
    - LocalAssetStore:       files on disk (development)
    - ImageUploadValidator:  size and media type gate for the `image` part
    - validators:            form field parsing per resource kind
    - ResourceService:       validate → resolve → asset step → persist
"""
