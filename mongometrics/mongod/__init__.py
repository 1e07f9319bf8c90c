"""Metrics specific to mongod, under the mongodb_mongod namespace."""