"""
mongo_people

Basic document-database operations (connect, create, read, update, delete, chained queries)
demonstrated on a Person collection through a small object-document mapper built on pymongo.
"""
