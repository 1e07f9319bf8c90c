"""serverStatus metrics shared by mongod and mongos, under the mongodb namespace."""